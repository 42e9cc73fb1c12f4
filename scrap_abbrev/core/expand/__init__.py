"""Abbreviation expansion.

expand_scrap walks a (left, right) pair of parsed scrap trees into string
pairs; casing adds case variants of each pair; expand_many glues parsing,
expansion and casing together for a batch of entries.
"""
