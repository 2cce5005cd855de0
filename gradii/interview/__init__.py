"""
Interview taking: question sets and their generation, per-answer scoring, the
unified flow and overall analysis.
"""
