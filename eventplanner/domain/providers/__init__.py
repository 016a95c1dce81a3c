"""Providers Domain - service provider profiles and directory"""
