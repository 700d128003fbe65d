import pytest
from pawpal import bcrypt, create_app, db
from pawpal.config import TestConfig
from pawpal.models import Role, User
from pawpal.utils import issue_token


def pet_data(**overrides):
    data = {
        'name': 'Rex',
        'species': 'dog',
        'breed': 'Beagle',
        'age': 5,
        'gender': 'male',
        'size': 'small',
        'description': 'Friendly and curious',
        'image_url': '/uploads/rex.jpg',
        'location': 'Almaty',
        'health_details': 'Vaccinated',
    }
    data.update(overrides)
    return data


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(username, role=Role.USER, password='secret123'):
        with app.app_context():
            user = User(
                username=username,
                email=f'{username}@example.com',
                name=username.title(),
                password=bcrypt.generate_password_hash(password).decode('utf-8'),
                role=role
            )
            db.session.add(user)
            db.session.commit()
            return user.id, issue_token(user)
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user('alice')


@pytest.fixture
def other_user(make_user):
    return make_user('bob')


@pytest.fixture
def admin(make_user):
    return make_user('root', role=Role.ADMIN)


@pytest.fixture
def pet(client, admin):
    response = client.post('/api/pets', json=pet_data(), headers=auth_header(admin[1]))
    assert response.status_code == 201
    return response.get_json()
