"""
Endee_Ops - Query Request Toolkit for the Endee Vector Database

A client-side toolkit for describing similarity-search queries against an
Endee index: dense and sparse query vectors, filter clauses, and the search
tuning knobs (ef, prefilter cardinality threshold, filter boost). Requests
are built fluently, validated against engine constraints, and converted to
the payload the query engine accepts.
"""

__version__ = "0.1.0"
