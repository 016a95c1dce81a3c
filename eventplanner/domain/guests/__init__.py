"""Guests Domain - invitation lists for private events"""
