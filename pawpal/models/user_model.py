import enum
from datetime import datetime
from pawpal import db


class Role(enum.Enum):
    USER = 'user'
    ADMIN = 'admin'


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.Enum(Role, values_callable=lambda roles: [r.value for r in roles]),
                     nullable=False, default=Role.USER)
    profile_image = db.Column(db.String(255))
    phone = db.Column(db.String(40))
    favorites = db.Column(db.JSON, nullable=False, default=list)  # pet ids
    adoption_history = db.Column(db.JSON, nullable=False, default=list)  # pet ids
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'

    def to_dict(self):
        # password hash never leaves the model
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'name': self.name,
            'role': self.role.value,
            'profile_image': self.profile_image,
            'phone': self.phone,
            'favorites': list(self.favorites or []),
            'adoption_history': list(self.adoption_history or []),
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
