import logging
from flask_restx import Namespace, Resource, fields
from flask import request
from pawpal.errors import FieldError, ValidationFailed
from pawpal.schemas import check_email

logger = logging.getLogger(__name__)

health_ns = Namespace('health', description='Service health', path='/health')
newsletter_ns = Namespace('newsletter', description='Newsletter sign-up', path='/newsletter')

newsletter_model = newsletter_ns.model('NewsletterSignup', {
    'email': fields.String(required=True)
})


@health_ns.route('')
class Health(Resource):
    def get(self):
        return {'status': 'ok'}, 200


@newsletter_ns.route('')
class Newsletter(Resource):
    @newsletter_ns.expect(newsletter_model)
    def post(self):
        """Sign up for the newsletter (nothing is stored)"""
        email = (request.get_json(silent=True) or {}).get('email')
        if not isinstance(email, str) or not email.strip():
            raise ValidationFailed([FieldError('email', 'Field required')])
        try:
            email = check_email(email.strip())
        except ValueError as e:
            raise ValidationFailed([FieldError('email', str(e))]) from e
        logger.info(f"Newsletter sign-up for {email}")
        return {'message': 'Subscribed to the newsletter', 'email': email}, 200
