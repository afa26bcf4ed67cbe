"""GUI"""
