"""
Ad Creative Optimizer - explore/exploit engine for ad creatives
"""
