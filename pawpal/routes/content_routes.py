from flask_restx import Namespace, Resource, fields
from flask import request
from pawpal.models import Role
from pawpal.services import content_service
from pawpal.utils import role_required, token_required

resource_ns = Namespace('resources', description='Pet care articles', path='/resources')
testimonial_ns = Namespace('testimonials', description='Adopter testimonials', path='/testimonials')

resource_model = resource_ns.model('Resource', {
    'id': fields.Integer(readonly=True),
    'title': fields.String(required=True),
    'content': fields.String(required=True),
    'summary': fields.String(required=True),
    'category': fields.String(required=True),
    'image_url': fields.String(required=True),
    'created_at': fields.String(readonly=True)
})

testimonial_model = testimonial_ns.model('Testimonial', {
    'id': fields.Integer(readonly=True),
    'name': fields.String(required=True),
    'pet_name': fields.String(required=True),
    'pet_type': fields.String(required=True),
    'content': fields.String(required=True),
    'rating': fields.Integer(required=True),
    'image_url': fields.String(),
    'created_at': fields.String(readonly=True)
})


@resource_ns.route('')
class ResourceList(Resource):
    @resource_ns.param('category', 'Only articles in this category')
    @resource_ns.marshal_list_with(resource_model)
    def get(self):
        """List articles"""
        return content_service.list_resources(request.args.get('category') or None), 200

    @role_required(Role.ADMIN)
    @resource_ns.expect(resource_model)
    @resource_ns.doc(security='BearerAuth')
    @resource_ns.marshal_with(resource_model, code=201)
    def post(self):
        """Create an article (admin)"""
        return content_service.create_resource(request.get_json(silent=True)), 201


@resource_ns.route('/featured')
class FeaturedResources(Resource):
    @resource_ns.marshal_list_with(resource_model)
    def get(self):
        """Articles shown on the home page"""
        return content_service.featured_resources(), 200


@resource_ns.route('/<int:resource_id>')
class ResourceItem(Resource):
    @resource_ns.marshal_with(resource_model)
    def get(self, resource_id):
        return content_service.get_resource(resource_id), 200

    @role_required(Role.ADMIN)
    @resource_ns.expect(resource_model)
    @resource_ns.doc(security='BearerAuth')
    @resource_ns.marshal_with(resource_model)
    def put(self, resource_id):
        return content_service.update_resource(resource_id, request.get_json(silent=True)), 200

    @role_required(Role.ADMIN)
    @resource_ns.doc(security='BearerAuth')
    def delete(self, resource_id):
        content_service.delete_resource(resource_id)
        return {'message': 'Resource deleted'}, 200


@testimonial_ns.route('')
class TestimonialList(Resource):
    @testimonial_ns.marshal_list_with(testimonial_model)
    def get(self):
        return content_service.list_testimonials(), 200

    @token_required
    @testimonial_ns.expect(testimonial_model)
    @testimonial_ns.doc(security='BearerAuth')
    @testimonial_ns.marshal_with(testimonial_model, code=201)
    def post(self):
        """Share an adoption story"""
        return content_service.create_testimonial(request.get_json(silent=True)), 201


@testimonial_ns.route('/<int:testimonial_id>')
class TestimonialItem(Resource):
    @role_required(Role.ADMIN)
    @testimonial_ns.doc(security='BearerAuth')
    def delete(self, testimonial_id):
        content_service.delete_testimonial(testimonial_id)
        return {'message': 'Testimonial deleted'}, 200
