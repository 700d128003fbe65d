# pawpal/routes/users_routes.py
from flask_restx import Namespace, Resource, fields
from flask import request
from pawpal.errors import FieldError, ValidationFailed
from pawpal.models.user_model import Role
from pawpal.services import user_service
from pawpal.utils import current_auth, permission_required, token_required
from pawpal.utils.role_utils import update_user_role

user_ns = Namespace('user', description='Own profile', path='/user')
admin_ns = Namespace('admin', description='Administration', path='/admin')

profile_model = user_ns.model('Profile', {
    'name': fields.String(description='Display name'),
    'phone': fields.String(description='Phone number'),
    'profile_image': fields.String(description='Profile image URL')
})

role_model = admin_ns.model('RoleChange', {
    'role': fields.String(required=True, description='New role', enum=[r.value for r in Role])
})


@user_ns.route('')
class Profile(Resource):
    @token_required
    @user_ns.expect(profile_model)
    @user_ns.doc(security='BearerAuth')
    def patch(self):
        """Update the current user's profile"""
        return user_service.update_profile(current_auth().user_id, request.get_json(silent=True)), 200


@admin_ns.route('/users')
class UserList(Resource):
    @permission_required('view_all_users')
    @admin_ns.doc(security='BearerAuth')
    def get(self):
        """Get all users"""
        return user_service.list_users(), 200


@admin_ns.route('/users/<int:user_id>/role')
class UserRole(Resource):
    @permission_required('manage_roles')
    @admin_ns.expect(role_model)
    @admin_ns.doc(security='BearerAuth')
    def put(self, user_id):
        """Change a user's role"""
        data = request.get_json(silent=True) or {}
        if not data.get('role'):
            raise ValidationFailed([FieldError('role', 'Field required')])
        return update_user_role(user_id, data['role'], current_auth().user_id), 200


@admin_ns.route('/stats')
class DashboardStats(Resource):
    @permission_required('view_stats')
    @admin_ns.doc(security='BearerAuth')
    def get(self):
        """Get dashboard statistics"""
        return user_service.stats(), 200
