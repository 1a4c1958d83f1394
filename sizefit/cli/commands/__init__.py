"""CLI command modules"""
