from flask_restx import Namespace, Resource, fields
from flask import request
from pawpal.models.user_model import Role
from pawpal.services import user_service
from pawpal.utils import current_auth, token_required

auth_ns = Namespace('auth', description='Authentication operations')

register_model = auth_ns.model('Register', {
    'username': fields.String(required=True, description='Unique username'),
    'email': fields.String(required=True, description='E-mail address'),
    'password': fields.String(required=True, description='At least 6 characters with a letter and a digit'),
    'name': fields.String(description='Display name, defaults to the username'),
    'phone': fields.String(),
    'profile_image': fields.String()
})

login_model = auth_ns.model('Login', {
    'email': fields.String(required=True, description='E-mail address'),
    'password': fields.String(required=True, description='Password')
})


@auth_ns.route('/roles')
class Roles(Resource):
    def get(self):
        """List the available roles"""
        return {'roles': [role.value for role in Role]}, 200


@auth_ns.route('/register')
class Register(Resource):
    @auth_ns.expect(register_model)
    def post(self):
        """Register a new user (always with the user role)"""
        result = user_service.register_user(request.get_json(silent=True))
        return dict(result, message='User registered successfully'), 201


@auth_ns.route('/login')
class Login(Resource):
    @auth_ns.expect(login_model)
    def post(self):
        """Log in with e-mail and password"""
        result = user_service.login(request.get_json(silent=True))
        return dict(result, message='Logged in successfully'), 200


@auth_ns.route('/me')
class Me(Resource):
    @token_required
    @auth_ns.doc(security='BearerAuth')
    def get(self):
        """Current user with permissions"""
        return user_service.get_user(current_auth().user_id), 200
