"""Top-level package for the bearmaps routing core.

This package answers two questions over a road network built from map
data: which intersection is nearest a coordinate, and what is the
shortest travel path between two coordinates.
"""
