import logging
from flask_restx import Namespace, Resource, fields
from flask import request
from werkzeug.datastructures import FileStorage
from pawpal.errors import FieldError, ValidationFailed
from pawpal.filters import PetFilter
from pawpal.models import PetGender, PetSize, PetSpecies, PetStatus, Role
from pawpal.services import adoption_service, care_service, pet_service
from pawpal.utils import current_auth, role_required, token_required

logger = logging.getLogger(__name__)

pet_ns = Namespace('pets', description='Pet operations', path='/pets')
me_ns = Namespace('me', description='Current user resources', path='/me')
upload_ns = Namespace('uploads', description='File uploads', path='/uploads')

good_with_model = pet_ns.model('GoodWith', {
    'kids': fields.Boolean(),
    'dogs': fields.Boolean(),
    'cats': fields.Boolean()
})

pet_model = pet_ns.model('Pet', {
    'id': fields.Integer(readonly=True),
    'name': fields.String(required=True),
    'species': fields.String(required=True, enum=[s.value for s in PetSpecies]),
    'breed': fields.String(required=True),
    'age': fields.Integer(required=True, description='Age in months'),
    'gender': fields.String(required=True, enum=[g.value for g in PetGender]),
    'size': fields.String(required=True, enum=[s.value for s in PetSize]),
    'description': fields.String(required=True),
    'image_url': fields.String(required=True),
    'status': fields.String(enum=[s.value for s in PetStatus], default=PetStatus.AVAILABLE.value),
    'location': fields.String(required=True),
    'health_details': fields.String(required=True),
    'good_with': fields.Raw(description='kids / dogs / cats flags'),
    'owner_id': fields.Integer(readonly=True),
    'created_at': fields.String(readonly=True)
})

medical_record_input = pet_ns.model('ListingMedicalRecord', {
    'record_type': fields.String(required=True),
    'record_date': fields.String(required=True, description='ISO 8601 date'),
    'description': fields.String(required=True),
    'vet_name': fields.String(),
    'attachment_url': fields.String(),
    'notes': fields.String()
})

listing_model = pet_ns.inherit('PetListing', pet_model, {
    'medical_records': fields.List(fields.Nested(medical_record_input))
})

favorite_model = pet_ns.model('Favorite', {
    'favorited': fields.Boolean(description='Set explicitly; toggles when absent')
})

list_parser = pet_ns.parser()
list_parser.add_argument('status', type=str, location='args', help='Pet status')
list_parser.add_argument('ownerId', type=int, location='args', help='Lister user id')
list_parser.add_argument('search', type=str, location='args', help='Name or breed substring')
list_parser.add_argument('species', type=str, location='args')
list_parser.add_argument('age', type=str, location='args', help='puppy, young, adult or senior')
list_parser.add_argument('gender', type=str, location='args')
list_parser.add_argument('size', type=str, location='args')
list_parser.add_argument('goodWith', type=str, location='args', action='append', help='kids, dogs or cats')

upload_parser = upload_ns.parser()
upload_parser.add_argument('file', type=FileStorage, location='files', required=True, help='Pet image')


@pet_ns.route('')
class PetList(Resource):
    @pet_ns.doc('list_pets')
    @pet_ns.expect(list_parser)
    @pet_ns.marshal_list_with(pet_model)
    def get(self):
        """List pets, optionally filtered"""
        status = request.args.get('status') or None
        owner_id = request.args.get('ownerId', type=int)
        pets = pet_service.list_pets(status=status, owner_id=owner_id,
                                     pet_filter=PetFilter.from_args(request.args))
        logger.debug(f"Listing {len(pets)} pets")
        return pets, 200

    @role_required(Role.ADMIN)
    @pet_ns.expect(pet_model)
    @pet_ns.doc('create_pet', security='BearerAuth')
    @pet_ns.marshal_with(pet_model, code=201)
    def post(self):
        """Create a pet (admin)"""
        return pet_service.create_pet(request.get_json(silent=True)), 201


@pet_ns.route('/listings')
class PetListing(Resource):
    @token_required
    @pet_ns.expect(listing_model)
    @pet_ns.doc('list_pet_for_adoption', security='BearerAuth')
    @pet_ns.marshal_with(pet_model, code=201)
    def post(self):
        """List your own pet for adoption"""
        return pet_service.create_listing(request.get_json(silent=True), current_auth().user_id), 201


@pet_ns.route('/favorites')
class FavoritePets(Resource):
    @token_required
    @pet_ns.doc('favorite_pets', security='BearerAuth')
    @pet_ns.marshal_list_with(pet_model)
    def get(self):
        """Pets the current user marked as favorite"""
        return pet_service.favorite_pets(current_auth().user_id), 200


@pet_ns.route('/<int:pet_id>')
class PetResource(Resource):
    @pet_ns.doc('get_pet')
    @pet_ns.marshal_with(pet_model)
    def get(self, pet_id):
        """Get a pet by ID"""
        return pet_service.get_pet(pet_id), 200

    @token_required
    @pet_ns.expect(pet_model)
    @pet_ns.doc('update_pet', security='BearerAuth')
    @pet_ns.marshal_with(pet_model)
    def put(self, pet_id):
        """Update a pet (admin or the user who listed it)"""
        return pet_service.update_pet(pet_id, request.get_json(silent=True), current_auth()), 200

    @token_required
    @pet_ns.doc('delete_pet', security='BearerAuth')
    def delete(self, pet_id):
        """Delete a pet (admin or the user who listed it)"""
        pet_service.delete_pet(pet_id, current_auth())
        return {'message': 'Pet deleted'}, 200


@pet_ns.route('/<int:pet_id>/favorite')
class PetFavorite(Resource):
    @token_required
    @pet_ns.expect(favorite_model)
    @pet_ns.doc('favorite_pet', security='BearerAuth')
    def post(self, pet_id):
        """Mark or unmark a pet as favorite"""
        data = request.get_json(silent=True) or {}
        favorited = data.get('favorited')
        if favorited is not None and not isinstance(favorited, bool):
            raise ValidationFailed([FieldError('favorited', 'Input should be a valid boolean')])
        favorites = pet_service.set_favorite(current_auth().user_id, pet_id, favorited)
        return {'pet_id': pet_id, 'favorited': pet_id in favorites, 'favorites': favorites}, 200


@pet_ns.route('/<int:pet_id>/adoption-applications')
class PetApplications(Resource):
    @role_required(Role.ADMIN)
    @pet_ns.doc('pet_applications', security='BearerAuth')
    def get(self, pet_id):
        """Adoption applications for a pet (admin)"""
        return adoption_service.list_for_pet(pet_id), 200


@pet_ns.route('/<int:pet_id>/medical-records')
class PetMedicalRecords(Resource):
    @token_required
    @pet_ns.doc('pet_medical_records', security='BearerAuth')
    def get(self, pet_id):
        """Medical records for a pet"""
        return care_service.list_records_for_pet(pet_id), 200


@me_ns.route('/pets')
class MyPets(Resource):
    @token_required
    @me_ns.doc('my_pets', security='BearerAuth')
    @me_ns.marshal_list_with(pet_model)
    def get(self):
        """Pets listed by the current user"""
        return pet_service.list_pets(owner_id=current_auth().user_id), 200


@upload_ns.route('/pet-image')
class PetImageUpload(Resource):
    @token_required
    @upload_ns.expect(upload_parser)
    @upload_ns.doc('upload_pet_image', security='BearerAuth')
    def post(self):
        """Upload a pet image and get its URL"""
        url = pet_service.save_pet_image(request.files.get('file'))
        return {'image_url': url}, 201
