"""Routing — segments, decision trees and the per-type segment cache.

Segments are derived once per type and are immutable afterwards.
"""
