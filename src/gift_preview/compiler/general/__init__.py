"""
general.
=======

Shared general-purpose modules used across the compiler (text hygiene,
lexicon table loading, trace logging).
"""
