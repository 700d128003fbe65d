from flask_restx import Namespace, Resource, fields
from flask import request
from pawpal.services import care_service
from pawpal.utils import current_auth, token_required

contact_ns = Namespace('emergency-contacts', description='Emergency contacts',
                       path='/emergency-contacts')
record_ns = Namespace('pet-medical-records', description='Pet medical records',
                      path='/pet-medical-records')

contact_model = contact_ns.model('EmergencyContact', {
    'contact_name': fields.String(required=True),
    'phone': fields.String(required=True),
    'address': fields.String(required=True),
    'is_vet': fields.Boolean(default=False),
    'email': fields.String(),
    'notes': fields.String()
})

record_model = record_ns.model('PetMedicalRecord', {
    'pet_id': fields.Integer(required=True),
    'record_type': fields.String(required=True, description='vaccination, checkup, surgery...'),
    'record_date': fields.String(required=True, description='ISO 8601 date'),
    'description': fields.String(required=True),
    'vet_name': fields.String(),
    'attachment_url': fields.String(),
    'notes': fields.String()
})


@contact_ns.route('')
class ContactList(Resource):
    @token_required
    @contact_ns.doc(security='BearerAuth')
    def get(self):
        return care_service.list_contacts(current_auth().user_id), 200

    @token_required
    @contact_ns.expect(contact_model)
    @contact_ns.doc(security='BearerAuth')
    def post(self):
        return care_service.create_contact(request.get_json(silent=True), current_auth().user_id), 201


@contact_ns.route('/<int:contact_id>')
class ContactItem(Resource):
    @token_required
    @contact_ns.doc(security='BearerAuth')
    def get(self, contact_id):
        return care_service.get_contact(contact_id, current_auth()), 200

    @token_required
    @contact_ns.expect(contact_model)
    @contact_ns.doc(security='BearerAuth')
    def put(self, contact_id):
        return care_service.update_contact(contact_id, request.get_json(silent=True), current_auth()), 200

    @token_required
    @contact_ns.doc(security='BearerAuth')
    def delete(self, contact_id):
        care_service.delete_contact(contact_id, current_auth())
        return {'message': 'Emergency contact deleted'}, 200


@record_ns.route('')
class RecordList(Resource):
    @token_required
    @record_ns.doc(security='BearerAuth')
    def get(self):
        """The current user's medical records, newest first"""
        return care_service.list_records_for_user(current_auth().user_id), 200

    @token_required
    @record_ns.expect(record_model)
    @record_ns.doc(security='BearerAuth')
    def post(self):
        return care_service.create_record(request.get_json(silent=True), current_auth().user_id), 201


@record_ns.route('/<int:record_id>')
class RecordItem(Resource):
    @token_required
    @record_ns.doc(security='BearerAuth')
    def get(self, record_id):
        return care_service.get_record(record_id, current_auth()), 200

    @token_required
    @record_ns.expect(record_model)
    @record_ns.doc(security='BearerAuth')
    def put(self, record_id):
        return care_service.update_record(record_id, request.get_json(silent=True), current_auth()), 200

    @token_required
    @record_ns.doc(security='BearerAuth')
    def delete(self, record_id):
        pet_id = care_service.delete_record(record_id, current_auth())
        return {'message': 'Medical record deleted', 'pet_id': pet_id}, 200
