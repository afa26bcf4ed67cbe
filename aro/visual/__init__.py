"""Presentation"""
