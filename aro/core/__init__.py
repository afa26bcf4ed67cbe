"""Core controller"""
