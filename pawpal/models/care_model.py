from datetime import datetime
from pawpal import db


class EmergencyContact(db.Model):
    __tablename__ = 'emergency_contacts'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    contact_name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(40), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    is_vet = db.Column(db.Boolean, nullable=False, default=False)
    email = db.Column(db.String(120))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<EmergencyContact {self.contact_name} of User {self.user_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'contact_name': self.contact_name,
            'phone': self.phone,
            'address': self.address,
            'is_vet': self.is_vet,
            'email': self.email,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }


class PetMedicalRecord(db.Model):
    __tablename__ = 'pet_medical_records'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    pet_id = db.Column(db.Integer, db.ForeignKey('pets.id'), nullable=False)
    record_type = db.Column(db.String(50), nullable=False)  # vaccination, surgery, check-up...
    record_date = db.Column(db.DateTime, nullable=False)
    description = db.Column(db.Text, nullable=False)
    vet_name = db.Column(db.String(120))
    attachment_url = db.Column(db.String(255))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<PetMedicalRecord {self.record_type} for Pet {self.pet_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'pet_id': self.pet_id,
            'record_type': self.record_type,
            'record_date': self.record_date.isoformat(),
            'description': self.description,
            'vet_name': self.vet_name,
            'attachment_url': self.attachment_url,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
