"""Woodshop: clients, materials, products and projects of a joinery business."""

__version__ = "0.1.0"
