# Resources (articles) and testimonials
import logging
from pawpal import db
from pawpal.models import Resource, Testimonial
from pawpal.schemas import EntityKind
from pawpal.services.common import apply_changes, checked_insert, checked_update, get_or_404

logger = logging.getLogger(__name__)

FEATURED_RESOURCES = 3


def list_resources(category=None):
    query = Resource.query
    if category:
        query = query.filter_by(category=category)
    return [r.to_dict() for r in query.order_by(Resource.id.asc()).all()]


def featured_resources():
    return list_resources()[:FEATURED_RESOURCES]


def get_resource(resource_id):
    return get_or_404(Resource, resource_id, 'Resource not found').to_dict()


def create_resource(candidate):
    record = checked_insert(EntityKind.RESOURCE, candidate, 'Invalid resource data')
    resource = Resource(**record)
    db.session.add(resource)
    db.session.commit()
    logger.info(f"Created resource {resource.id} in {resource.category}")
    return resource.to_dict()


def update_resource(resource_id, candidate):
    resource = get_or_404(Resource, resource_id, 'Resource not found')
    changes = checked_update(EntityKind.RESOURCE, candidate, 'Invalid resource data')
    apply_changes(resource, changes)
    db.session.commit()
    return resource.to_dict()


def delete_resource(resource_id):
    resource = get_or_404(Resource, resource_id, 'Resource not found')
    db.session.delete(resource)
    db.session.commit()
    logger.info(f"Deleted resource {resource_id}")


def list_testimonials():
    return [t.to_dict() for t in Testimonial.query.order_by(Testimonial.id.asc()).all()]


def create_testimonial(candidate):
    record = checked_insert(EntityKind.TESTIMONIAL, candidate, 'Invalid testimonial data')
    testimonial = Testimonial(**record)
    db.session.add(testimonial)
    db.session.commit()
    logger.info(f"Created testimonial {testimonial.id}")
    return testimonial.to_dict()


def delete_testimonial(testimonial_id):
    testimonial = get_or_404(Testimonial, testimonial_id, 'Testimonial not found')
    db.session.delete(testimonial)
    db.session.commit()
    logger.info(f"Deleted testimonial {testimonial_id}")
