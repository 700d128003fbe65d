import enum
from datetime import datetime
from pawpal import db


class PetSpecies(enum.Enum):
    DOG = 'dog'
    CAT = 'cat'
    RABBIT = 'rabbit'
    BIRD = 'bird'
    GUINEA_PIG = 'guinea_pig'
    FISH = 'fish'
    PARROT = 'parrot'
    HAMSTER = 'hamster'
    OTHER = 'other'


class PetStatus(enum.Enum):
    AVAILABLE = 'available'
    ADOPTED = 'adopted'
    PENDING = 'pending'
    FOSTERED = 'fostered'


class PetGender(enum.Enum):
    MALE = 'male'
    FEMALE = 'female'


class PetSize(enum.Enum):
    SMALL = 'small'
    MEDIUM = 'medium'
    LARGE = 'large'


class Pet(db.Model):
    __tablename__ = 'pets'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    species = db.Column(db.String(30), nullable=False)
    breed = db.Column(db.String(100), nullable=False)
    age = db.Column(db.Integer, nullable=False)  # months
    gender = db.Column(db.String(10), nullable=False)
    size = db.Column(db.String(10), nullable=False)
    description = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=PetStatus.AVAILABLE.value)
    location = db.Column(db.String(200), nullable=False)
    health_details = db.Column(db.Text, nullable=False)
    good_with = db.Column(db.JSON, nullable=False, default=dict)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Pet {self.name} ({self.species})>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'species': self.species,
            'breed': self.breed,
            'age': self.age,
            'gender': self.gender,
            'size': self.size,
            'description': self.description,
            'image_url': self.image_url,
            'status': self.status,
            'location': self.location,
            'health_details': self.health_details,
            'good_with': dict(self.good_with or {}),
            'owner_id': self.owner_id,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
