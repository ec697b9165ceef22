"""
Entity resolvers.

Plain synchronous functions taking the document store first. They raise
the ``errors`` taxonomy and return plain records; the graph layer turns
those into GraphQL types.
"""
