"""Bounding box records and helpers.

:author: Shay Hill
:created: 2022-12-09
"""
