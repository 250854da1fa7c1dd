"""Industry templates: default wording and feature set per business sector.

A tenant that has not overridden a vocabulary entry or a feature flag
inherits the value from the template of its industry, and ultimately
from ``GENERIC`` which defines every key.
"""

VOCABULARY_KEYS = (
    "workplace",
    "action_in",
    "action_out",
    "greeting",
    "goodbye",
    "manager",
    "employee",
    "attendance",
)

VOCABULARY_LABELS = {
    "workplace": "Lieu de travail",
    "action_in": "Action d'arrivee",
    "action_out": "Action de depart",
    "greeting": "Salutation du matin",
    "goodbye": "Salutation de depart",
    "manager": "Titre du manager",
    "employee": "Titre de l'employe",
    "attendance": "Nom du pointage",
}

FEATURE_KEYS = (
    "enable_gps",
    "enable_photos",
    "enable_expenses",
    "enable_documents",
    "enable_leave_requests",
    "enable_reminders",
)

FEATURE_LABELS = {
    "enable_gps": "Validation GPS",
    "enable_photos": "Photos de pointage",
    "enable_expenses": "Notes de frais",
    "enable_documents": "Documents",
    "enable_leave_requests": "Demandes de conge",
    "enable_reminders": "Relances automatiques",
}

GENERIC = "GENERIC"

INDUSTRY_TEMPLATES = {
    "BTP": {
        "vocabulary": {
            "workplace": "Chantier",
            "action_in": "Arrivée chantier",
            "action_out": "Fin de chantier",
            "greeting": "Bonne journée sur le chantier !",
            "goodbye": "Bonne fin de journée !",
            "manager": "Chef de chantier",
            "employee": "Ouvrier",
            "attendance": "Pointage",
        },
        "config": {
            "enable_gps": True,
            "enable_photos": True,
            "enable_expenses": True,
            "enable_documents": True,
            "enable_leave_requests": True,
            "enable_reminders": True,
        },
    },
    "RETAIL": {
        "vocabulary": {
            "workplace": "Magasin",
            "action_in": "Prise de poste",
            "action_out": "Fin de service",
            "greeting": "Bonne journée en boutique !",
            "goodbye": "À demain !",
            "manager": "Responsable magasin",
            "employee": "Vendeur",
            "attendance": "Pointage",
        },
        "config": {
            "enable_gps": False,
            "enable_photos": False,
            "enable_expenses": True,
            "enable_documents": True,
            "enable_leave_requests": True,
            "enable_reminders": True,
        },
    },
    "CLEANING": {
        "vocabulary": {
            "workplace": "Site",
            "action_in": "Début intervention",
            "action_out": "Fin intervention",
            "greeting": "Bonne intervention !",
            "goodbye": "Intervention terminée !",
            "manager": "Chef d'équipe",
            "employee": "Agent",
            "attendance": "Pointage",
        },
        "config": {
            "enable_gps": True,
            "enable_photos": True,
            "enable_expenses": False,
            "enable_documents": True,
            "enable_leave_requests": True,
            "enable_reminders": True,
        },
    },
    "SECURITY": {
        "vocabulary": {
            "workplace": "Poste",
            "action_in": "Prise de poste",
            "action_out": "Fin de vacation",
            "greeting": "Bonne vacation !",
            "goodbye": "Relève effectuée !",
            "manager": "Chef de site",
            "employee": "Agent de sécurité",
            "attendance": "Pointage",
        },
        "config": {
            "enable_gps": True,
            "enable_photos": True,
            "enable_expenses": False,
            "enable_documents": True,
            "enable_leave_requests": True,
            "enable_reminders": True,
        },
    },
    "OFFICE": {
        "vocabulary": {
            "workplace": "Bureau",
            "action_in": "Bonjour",
            "action_out": "Bonne soirée",
            "greeting": "Bonne journée au bureau !",
            "goodbye": "À demain !",
            "manager": "Responsable",
            "employee": "Collaborateur",
            "attendance": "Présence",
        },
        "config": {
            "enable_gps": False,
            "enable_photos": False,
            "enable_expenses": True,
            "enable_documents": True,
            "enable_leave_requests": True,
            "enable_reminders": True,
        },
    },
    GENERIC: {
        "vocabulary": {
            "workplace": "Travail",
            "action_in": "Arrivée",
            "action_out": "Départ",
            "greeting": "Bonne journée !",
            "goodbye": "À bientôt !",
            "manager": "Manager",
            "employee": "Employé",
            "attendance": "Pointage",
        },
        "config": {
            "enable_gps": True,
            "enable_photos": False,
            "enable_expenses": True,
            "enable_documents": True,
            "enable_leave_requests": True,
            "enable_reminders": True,
        },
    },
}


def get_template(industry):
    """Return the template for *industry*, ``GENERIC`` when unknown."""
    return INDUSTRY_TEMPLATES.get(industry or GENERIC, INDUSTRY_TEMPLATES[GENERIC])
