"""
Deterministic roll math.

Pure Python, no storage, no rounding beyond what each function documents.
Given OD / ID / thickness in either unit, produce the remaining length.
"""
