"""Configuration components"""
