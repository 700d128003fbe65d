import enum
from datetime import datetime
from pawpal import db


class AppointmentType(enum.Enum):
    MEET_AND_GREET = 'meet_and_greet'
    VETERINARY_CARE = 'veterinary_care'
    GROOMING = 'grooming'


class AppointmentStatus(enum.Enum):
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class Appointment(db.Model):
    __tablename__ = 'appointments'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    participant_user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    pet_id = db.Column(db.Integer, db.ForeignKey('pets.id'), nullable=True)
    type = db.Column(db.String(30), nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Appointment {self.id} {self.type} by User {self.user_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'participant_user_id': self.participant_user_id,
            'pet_id': self.pet_id,
            'type': self.type,
            'date': self.date.isoformat(),
            'status': self.status,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
