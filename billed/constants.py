ROUTES_PATH = {
    "Login": "/",
    "Bills": "#employee/bills",
    "NewBill": "#employee/bill/new",
}

EXPENSE_TYPES = [
    "Transports",
    "Restaurants et bars",
    "Hôtel et logement",
    "Services en ligne",
    "IT et électronique",
    "Equipement et matériel",
    "Fournitures de bureau",
]

ALLOWED_RECEIPT_EXTENSIONS = ("jpg", "jpeg", "png")

DEFAULT_PCT = 20

DEFAULT_LOCALE = "fr"

STATUS_LABELS = {
    "fr": {"pending": "En attente", "accepted": "Accepté", "refused": "Refusé"},
    "en": {"pending": "Pending", "accepted": "Accepted", "refused": "Refused"},
}

# Short month names, already cut to the three letters shown in the bill list.
MONTHS_SHORT = {
    "fr": {
        1: "Jan",
        2: "Fév",
        3: "Mar",
        4: "Avr",
        5: "Mai",
        6: "Jui",
        7: "Jui",
        8: "Aoû",
        9: "Sep",
        10: "Oct",
        11: "Nov",
        12: "Déc",
    },
    "en": {
        1: "Jan",
        2: "Feb",
        3: "Mar",
        4: "Apr",
        5: "May",
        6: "Jun",
        7: "Jul",
        8: "Aug",
        9: "Sep",
        10: "Oct",
        11: "Nov",
        12: "Dec",
    },
}
