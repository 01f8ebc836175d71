"""
Short prefixed ID generator for narrative graph nodes.

Format: {prefix}_{base36_random}
- mo_xxxxxxxxxxxxxxxx  - moment
- ch_xxxxxxxxxxxxxxxx  - character
- lo_xxxxxxxxxxxxxxxx  - location

16 chars base36 = 36^16 ~ 7.9e24 unique IDs per type, drawn from `secrets`,
so concurrent creates never need coordination.
Total length: 19 chars (2 prefix + underscore + 16 random)
"""
import secrets

# Base36 alphabet (lowercase letters + digits)
ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
BASE = len(ALPHABET)  # 36
RANDOM_LENGTH = 16

# Valid prefixes
PREFIXES = {
    'moment': 'mo',
    'character': 'ch',
    'location': 'lo',
}


def _random_base36(length: int = RANDOM_LENGTH) -> str:
    """Generate random base36 string"""
    return ''.join(ALPHABET[secrets.randbelow(BASE)] for _ in range(length))


def generate_id(entity_type: str) -> str:
    """
    Generate a new short ID for the given entity type.

    Args:
        entity_type: One of 'moment', 'character', 'location'

    Returns:
        Short ID like 'mo_x5b8r2yj0k3m9q1w'

    Raises:
        ValueError: If entity_type is invalid
    """
    if entity_type not in PREFIXES:
        raise ValueError(f"Invalid entity type: {entity_type}. "
                         f"Must be one of: {list(PREFIXES.keys())}")

    return f"{PREFIXES[entity_type]}_{_random_base36()}"


# Convenience functions for each type
def generate_moment_id() -> str:
    """Generate a new moment ID"""
    return generate_id('moment')


def generate_character_id() -> str:
    """Generate a new character ID"""
    return generate_id('character')


def generate_location_id() -> str:
    """Generate a new location ID"""
    return generate_id('location')
