"""Read-only declaration template listing"""
