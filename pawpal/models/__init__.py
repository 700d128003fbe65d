from .user_model import User, Role
from .pet_model import Pet, PetSpecies, PetStatus, PetGender, PetSize
from .adoption_model import AdoptionApplication, ApplicationStatus
from .appointment_model import Appointment, AppointmentType, AppointmentStatus
from .content_model import Resource, Testimonial
from .care_model import EmergencyContact, PetMedicalRecord
