from flask_restx import Namespace, Resource, fields
from flask import request
from pawpal.models import AppointmentStatus, AppointmentType, Role
from pawpal.services import appointment_service
from pawpal.utils import current_auth, role_required, token_required
from .users_routes import admin_ns

appointment_ns = Namespace('appointments', description='Appointment operations', path='/appointments')

appointment_model = appointment_ns.model('Appointment', {
    'pet_id': fields.Integer(description='Pet the appointment is about'),
    'participant_user_id': fields.Integer(readonly=True, description='Lister of the pet, set by the server'),
    'type': fields.String(required=True, enum=[t.value for t in AppointmentType]),
    'date': fields.String(required=True, description='ISO 8601 date and time'),
    'notes': fields.String(),
    'status': fields.String(enum=[s.value for s in AppointmentStatus], description='Updates only')
})


@appointment_ns.route('')
class AppointmentList(Resource):
    @token_required
    @appointment_ns.doc(security='BearerAuth')
    def get(self):
        """Appointments the current user created or takes part in"""
        return appointment_service.list_for_user(current_auth().user_id), 200

    @token_required
    @appointment_ns.expect(appointment_model)
    @appointment_ns.doc(security='BearerAuth')
    def post(self):
        """Book an appointment"""
        return appointment_service.create_appointment(request.get_json(silent=True),
                                                      current_auth().user_id), 201


@appointment_ns.route('/<int:appointment_id>')
class AppointmentResource(Resource):
    @token_required
    @appointment_ns.doc(security='BearerAuth')
    def get(self, appointment_id):
        """Get appointment by ID"""
        return appointment_service.get_appointment(appointment_id, current_auth()), 200

    @token_required
    @appointment_ns.expect(appointment_model)
    @appointment_ns.doc(security='BearerAuth')
    def put(self, appointment_id):
        """Update an appointment"""
        return appointment_service.update_appointment(appointment_id, request.get_json(silent=True),
                                                      current_auth()), 200

    @token_required
    @appointment_ns.doc(security='BearerAuth')
    def delete(self, appointment_id):
        """Delete an appointment"""
        appointment_service.delete_appointment(appointment_id, current_auth())
        return {'message': 'Appointment deleted'}, 200


@admin_ns.route('/appointments')
class AllAppointments(Resource):
    @role_required(Role.ADMIN)
    @admin_ns.doc(security='BearerAuth')
    def get(self):
        """All appointments (admin)"""
        return appointment_service.list_all(), 200
