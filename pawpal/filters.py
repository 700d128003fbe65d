"""
In-memory pet filtering.

Raw query-string values are parsed into a :class:`PetFilter` once, at the
boundary, and the predicates below only ever see typed values. Any value
that is empty or not recognized turns that filter off instead of
matching nothing.
"""
import enum
from dataclasses import dataclass, field

from pawpal.models import PetGender, PetSize, PetSpecies
from pawpal.pet_display import get_field, get_pet_display_name

TRUE_VALUES = {'1', 'true', 'yes', 'on'}
GOOD_WITH_KEYS = ('kids', 'dogs', 'cats')


class AgeBucket(enum.Enum):
    PUPPY = 'puppy'    # < 12 months
    YOUNG = 'young'    # 12..35
    ADULT = 'adult'    # 36..83
    SENIOR = 'senior'  # >= 84


def age_bucket_for(age_months):
    if age_months < 12:
        return AgeBucket.PUPPY
    if age_months < 36:
        return AgeBucket.YOUNG
    if age_months < 84:
        return AgeBucket.ADULT
    return AgeBucket.SENIOR


@dataclass(frozen=True)
class GoodWithFilter:
    kids: bool = False
    dogs: bool = False
    cats: bool = False

    def requested(self):
        return [key for key in GOOD_WITH_KEYS if getattr(self, key)]


@dataclass(frozen=True)
class PetFilter:
    search: str = None
    species: PetSpecies = None
    age_bucket: AgeBucket = None
    gender: PetGender = None
    size: PetSize = None
    good_with: GoodWithFilter = field(default_factory=GoodWithFilter)

    def is_empty(self):
        return (not self.search and self.species is None and self.age_bucket is None
                and self.gender is None and self.size is None and not self.good_with.requested())

    @classmethod
    def from_args(cls, args):
        """Build a filter from request args (dict or werkzeug MultiDict)."""
        search = (_first(args, 'search') or '').strip() or None
        good_with = set(_many(args, 'goodWith') + _many(args, 'good_with'))
        flags = {key: key in good_with or _truthy(_first(args, f'good_with_{key}'))
                 for key in GOOD_WITH_KEYS}
        return cls(
            search=search,
            species=_parse_enum(PetSpecies, _first(args, 'species')),
            age_bucket=_parse_enum(AgeBucket, _first(args, 'age') or _first(args, 'age_bucket')),
            gender=_parse_enum(PetGender, _first(args, 'gender')),
            size=_parse_enum(PetSize, _first(args, 'size')),
            good_with=GoodWithFilter(**flags),
        )


def _first(args, key):
    value = args.get(key)
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _many(args, key):
    if hasattr(args, 'getlist'):
        return [str(v).strip().lower() for v in args.getlist(key)]
    value = args.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip().lower() for v in value]
    return [str(value).strip().lower()]


def _truthy(value):
    return value is not None and str(value).strip().lower() in TRUE_VALUES


def _parse_enum(enum_cls, value):
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        # "any", "any-age", "" and friends all mean no filter
        return None


def matches(pet, spec):
    if spec.search:
        term = spec.search.lower()
        breed = get_field(pet, 'breed') or ''
        if term not in get_pet_display_name(pet).lower() and term not in breed.lower():
            return False

    if spec.species is not None and get_field(pet, 'species') != spec.species.value:
        return False

    if spec.age_bucket is not None:
        age = get_field(pet, 'age')
        if age is None or age_bucket_for(age) is not spec.age_bucket:
            return False

    if spec.gender is not None and get_field(pet, 'gender') != spec.gender.value:
        return False

    if spec.size is not None and get_field(pet, 'size') != spec.size.value:
        return False

    good_with = get_field(pet, 'good_with') or {}
    for key in spec.good_with.requested():
        if good_with.get(key) is not True:
            return False

    return True


def filter_pets(pets, spec=None):
    """Pets passing every active filter, in their original order."""
    if spec is None or spec.is_empty():
        return list(pets)
    return [pet for pet in pets if matches(pet, spec)]
