"""
Utility functions for generating identifiers for ledger entities.
"""

import uuid


def generate_entity_id() -> str:
    """
    Generate a primary key for any organization-scoped entity.

    Returns:
        str: A random UUID4 in canonical 36-character form
            (e.g., '5b0c2f6e-8d4a-4c43-9d5e-2b1f0c7a9e11')
    """
    return str(uuid.uuid4())
