# pawpal/routes/__init__.py
from .auth_routes import auth_ns
from .users_routes import user_ns, admin_ns
from .pet_routes import pet_ns, me_ns, upload_ns
from .adoption_routes import adoption_ns
from .appointment_routes import appointment_ns
from .content_routes import resource_ns, testimonial_ns
from .care_routes import contact_ns, record_ns
from .misc_routes import health_ns, newsletter_ns

NAMESPACES = [
    auth_ns,
    user_ns,
    admin_ns,
    pet_ns,
    me_ns,
    upload_ns,
    adoption_ns,
    appointment_ns,
    resource_ns,
    testimonial_ns,
    contact_ns,
    record_ns,
    health_ns,
    newsletter_ns,
]
