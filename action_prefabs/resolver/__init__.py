"""Action tree resolution.

Main Components:
    - ActionResolver: sequential, recursive action tree walker
    - ResolutionContext: collaborators and recursion handle given to variants
"""

from action_prefabs.resolver.resolver import ActionResolver, ResolutionContext

__all__ = [
    "ActionResolver",
    "ResolutionContext",
]
