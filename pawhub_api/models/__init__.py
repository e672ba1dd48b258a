from pawhub_api.models.address import Address
from pawhub_api.models.user import User
from pawhub_api.models.project import Project
from pawhub_api.models.staff import Administrator, Employee, Donor, Volunteer
from pawhub_api.models.donation import Donation
from pawhub_api.models.animal import Animal
from pawhub_api.models.adoption import Adoption, AdoptionUpdate

__all__ = [
    "Address",
    "User",
    "Project",
    "Administrator",
    "Employee",
    "Donor",
    "Volunteer",
    "Donation",
    "Animal",
    "Adoption",
    "AdoptionUpdate",
]
