"""
Line tokenization: plain splitting and quote/escape-aware scanning.
"""
