"""Parsing, detection, aggregation, collaborator and export tools"""
