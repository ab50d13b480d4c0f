"""
Preference-driven suggestion engine.

Turns liked/disliked feedback into a preference profile, scores catalog
candidates against it and merges third-party enrichment into the results.
"""
