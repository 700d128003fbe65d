import enum
from datetime import datetime
from pawpal import db


class ApplicationStatus(enum.Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class AdoptionApplication(db.Model):
    __tablename__ = 'adoption_applications'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    pet_id = db.Column(db.Integer, db.ForeignKey('pets.id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=ApplicationStatus.PENDING.value)
    application_date = db.Column(db.DateTime, default=datetime.utcnow)
    notes = db.Column(db.Text)

    def __repr__(self):
        return f'<AdoptionApplication {self.id} user={self.user_id} pet={self.pet_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'pet_id': self.pet_id,
            'status': self.status,
            'application_date': self.application_date.isoformat() if self.application_date else None,
            'notes': self.notes
        }
