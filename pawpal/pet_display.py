import re

GENERIC_PET_NAME_REGEX = re.compile(r'^pet\s+\d+$', re.IGNORECASE)

NAME_BANK = {
    'dog': ['Buddy', 'Max', 'Charlie', 'Rocky', 'Cooper', 'Leo', 'Toby', 'Milo'],
    'cat': ['Luna', 'Bella', 'Nala', 'Coco', 'Simba', 'Mochi', 'Willow', 'Daisy'],
    'rabbit': ['Thumper', 'Clover', 'Hazel', 'Snowy', 'Peanut', 'Maple', 'Binky', 'Poppy'],
    'bird': ['Sunny', 'Rio', 'Kiwi', 'Skye', 'Pico', 'Blue', 'Mango', 'Coco'],
    'hamster': ['Nibbles', 'Pip', 'Oreo', 'Pebble', 'Biscuit', 'Bean', 'Toffee', 'Mimi'],
    'other': ['Nova', 'Lucky', 'Pepper', 'Ginger', 'Ash', 'Scout', 'Honey', 'Ziggy'],
    'default': ['Paws', 'Bailey', 'Misty', 'Ruby', 'Remy', 'Shadow', 'Rosie', 'Finn'],
}


def get_field(pet, field):
    if isinstance(pet, dict):
        return pet.get(field)
    return getattr(pet, field, None)


def needs_fallback_name(name):
    raw_name = (name or '').strip()
    return not raw_name or bool(GENERIC_PET_NAME_REGEX.match(raw_name))


def fallback_name(pet_id, species):
    """Stable placeholder name for a pet; nothing is persisted."""
    bank = NAME_BANK.get((species or '').lower(), NAME_BANK['default'])
    stable_index = abs((pet_id if pet_id is not None else 1) - 1) % len(bank)
    return bank[stable_index]


def get_pet_display_name(pet):
    """Name shown for a pet record (dict or model instance)."""
    name = get_field(pet, 'name')
    if not needs_fallback_name(name):
        return name.strip()
    return fallback_name(get_field(pet, 'id'), get_field(pet, 'species'))
