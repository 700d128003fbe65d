from flask_restx import Namespace, Resource, fields
from flask import request
from pawpal.models import ApplicationStatus
from pawpal.services import adoption_service
from pawpal.utils import current_auth, permission_required, token_required

adoption_ns = Namespace('adoption-applications', description='Adoption applications',
                        path='/adoption-applications')

application_model = adoption_ns.model('AdoptionApplication', {
    'pet_id': fields.Integer(required=True),
    'notes': fields.String()
})

status_model = adoption_ns.model('ApplicationStatus', {
    'status': fields.String(required=True, enum=[s.value for s in ApplicationStatus])
})


@adoption_ns.route('')
class ApplicationList(Resource):
    @token_required
    @adoption_ns.doc(security='BearerAuth')
    def get(self):
        """The current user's applications"""
        return adoption_service.list_for_user(current_auth().user_id), 200

    @token_required
    @adoption_ns.expect(application_model)
    @adoption_ns.doc(security='BearerAuth')
    def post(self):
        """Apply to adopt a pet"""
        return adoption_service.create_application(request.get_json(silent=True),
                                                   current_auth().user_id), 201


@adoption_ns.route('/<int:application_id>')
class ApplicationResource(Resource):
    @permission_required('update_application_status')
    @adoption_ns.expect(status_model)
    @adoption_ns.doc(security='BearerAuth')
    def put(self, application_id):
        """Approve or reject an application (admin)"""
        return adoption_service.update_status(application_id, request.get_json(silent=True),
                                              current_auth().user_id), 200
