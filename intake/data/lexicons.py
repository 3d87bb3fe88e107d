"""Curated French keyword lexicons — one immutable tuple per label.

The same lexicons seed the vocabularies, the synthetic training corpus and
the keyword rules, so editing a list here changes every stage at once (and
invalidates persisted models through the vocabulary fingerprint).
"""

from __future__ import annotations

# ── Ticket type ──────────────────────────────────────────────────────────
INCIDENT_KEYWORDS = (
    "problème", "incident", "panne", "erreur", "bug", "dysfonctionnement",
    "ne fonctionne pas", "ne fonctionne plus", "ne marche pas", "ne marche plus",
    "cassé", "bloqué", "planté", "plantage", "écran bleu", "bsod", "crash",
    "freeze", "gelé", "lenteur", "ralenti", "corruption", "endommagé", "perdu",
    "supprimé", "disparu", "incompatible", "impossible", "imprimante",
    "impression", "encre", "toner", "cartouche", "virus", "malware",
)

REQUEST_KEYWORDS = (
    "demande", "requête", "besoin", "nouveau", "nouvelle", "installer",
    "installation", "configurer", "paramétrer", "créer", "création", "ajouter",
    "mise à jour", "mettre à jour", "modifier", "changer", "remplacer", "accès",
    "autorisation", "permission", "droit", "compte", "identifiant", "formation",
    "aide", "assistance", "information", "renseignement", "conseil", "obtenir",
    "pourriez-vous", "serait-il possible", "j'aimerais", "je souhaite",
    "je voudrais",
)

TYPE_LEXICONS = {
    "incident": INCIDENT_KEYWORDS,
    "request": REQUEST_KEYWORDS,
}

# ── Categories (prefix = ticket type in the ITSM taxonomy) ──────────────
CATEGORY_LEXICONS = {
    "incident_autre": (
        "autre", "divers", "inconnu", "indéterminé", "général",
    ),
    "incident_logiciel": (
        "logiciel", "application", "programme", "software", "windows",
        "office", "excel", "word", "outlook", "email", "mail", "navigateur",
        "browser", "chrome", "firefox", "internet", "système d'exploitation",
        "mise à jour", "update", "erreur", "bug", "plantage", "freeze",
        "blocage", "lenteur", "performance", "antivirus", "sauvegarde",
        "backup", "restauration", "désinstallation",
    ),
    "incident_materiel": (
        "matériel", "hardware", "ordinateur", "pc", "laptop", "écran",
        "clavier", "souris", "imprimante", "scanner", "téléphone", "batterie",
        "chargeur", "alimentation", "disque dur", "mémoire", "processeur",
        "carte graphique", "ventilateur", "surchauffe", "bruit",
        "ne s'allume pas", "ne démarre pas", "périphérique", "port usb", "hdmi",
        "câble", "connecteur", "station d'accueil",
    ),
    "incident_reseau": (
        "réseau", "network", "internet", "wifi", "connexion", "déconnexion",
        "intranet", "serveur", "vpn", "proxy", "dns", "ethernet", "routeur",
        "switch", "pare-feu", "firewall", "modem", "fibre", "bande passante",
        "latence", "perte de paquets", "timeout", "délai d'attente", "sans fil",
        "wireless", "bluetooth", "synchronisation",
    ),
    "incident_securite": (
        "sécurité", "virus", "malware", "ransomware", "phishing", "hameçonnage",
        "spam", "piratage", "hack", "compromis", "suspect",
        "accès non autorisé", "mot de passe", "authentification",
        "vol de données", "fuite de données", "confidentialité", "chiffrement",
        "certificat", "vulnérabilité", "attaque", "menace", "alerte",
    ),
    "demande_acces": (
        "accès", "autorisation", "permission", "droit", "compte", "identifiant",
        "login", "mot de passe", "réinitialisation", "débloquer", "verrouillé",
        "session", "profil", "utilisateur", "groupe", "privilège",
        "administrateur", "dossier partagé", "partage",
    ),
    "demande_autre": (
        "autre", "divers", "spécifique", "particulier", "exceptionnel",
        "ponctuel", "inhabituel", "non standard", "personnalisé", "sur mesure",
    ),
    "demande_information": (
        "information", "renseignement", "question", "comment", "procédure",
        "documentation", "guide", "manuel", "formation", "aide", "assistance",
        "conseil", "tutoriel", "explication", "clarification", "instruction",
        "mode d'emploi", "faq",
    ),
    "demande_logiciel": (
        "logiciel", "application", "programme", "software", "installation",
        "mise à jour", "update", "version", "licence", "license", "abonnement",
        "office", "windows", "déploiement", "extension", "plugin", "module",
        "fonctionnalité", "outil", "utilitaire",
    ),
    "demande_materiel": (
        "matériel", "hardware", "équipement", "ordinateur", "pc", "laptop",
        "écran", "clavier", "souris", "imprimante", "scanner", "téléphone",
        "smartphone", "tablette", "casque", "accessoire", "périphérique",
        "disque dur", "ssd", "mémoire", "chargeur", "adaptateur", "câble",
        "webcam", "microphone", "haut-parleur", "enceinte",
    ),
}

# ── Urgency bands (1 = most urgent) ──────────────────────────────────────
URGENCY_LEXICONS = {
    1: (
        "urgent", "critique", "immédiatement", "grave", "bloquant",
        "impossible de travailler", "ne peux plus travailler",
        "production arrêtée", "sécurité compromise", "très urgent", "immédiat",
        "priorité absolue", "catastrophique", "majeur", "crucial", "vital",
        "perte financière", "perte de données", "impact majeur",
        "tous les utilisateurs", "entreprise entière", "urgence maximale",
        "sans délai",
    ),
    2: (
        "important", "prioritaire", "rapidement", "dès que possible",
        "impact significatif", "plusieurs utilisateurs", "service dégradé",
        "haute priorité", "perturbation importante", "affecte un département",
        "productivité réduite", "fonctionnalité principale",
        "contournement difficile", "impact sur les clients", "délai court",
        "aujourd'hui", "dans la journée",
    ),
    3: (
        "normal", "standard", "régulier", "gênant", "un utilisateur",
        "priorité normale", "impact modéré", "fonctionnalité secondaire",
        "alternative disponible", "contournement possible",
        "perturbation mineure", "quelques utilisateurs",
        "productivité affectée", "cette semaine", "dans les jours qui viennent",
    ),
    4: (
        "basse", "faible", "non urgent", "peu important", "faible priorité",
        "impact mineur", "fonctionnalité rarement utilisée",
        "contournement simple", "perturbation minime", "un seul utilisateur",
        "productivité peu affectée", "ce mois-ci", "dans les semaines à venir",
    ),
    5: (
        "très faible", "minimal", "cosmétique", "amélioration", "suggestion",
        "éventuel", "plus tard", "priorité minimale", "aucun impact",
        "fonctionnalité optionnelle", "esthétique", "ergonomie", "confort",
        "quand vous aurez le temps", "sans échéance", "à planifier",
        "prochainement",
    ),
}

# ── Sentiment ────────────────────────────────────────────────────────────
SENTIMENT_LEXICONS = {
    "negative": (
        "frustré", "énervé", "agacé", "irrité", "en colère", "mécontent",
        "insatisfait", "déçu", "ras-le-bol", "ça suffit", "marre",
        "inadmissible", "inacceptable", "ridicule", "absurde",
        "n'importe quoi", "mauvais", "horrible", "terrible", "affreux",
        "médiocre", "désastreux", "pénible", "insupportable",
        "toujours pas résolu", "encore une fois",
    ),
    "neutral": (
        "bonjour", "bonsoir", "salut", "hello", "madame", "monsieur",
        "cordialement", "concernant", "au sujet de", "suivi", "ticket",
        "référence", "statut", "avancement", "s'il vous plaît", "svp",
    ),
    "positive": (
        "merci", "remercie", "bien", "super", "génial", "excellent", "parfait",
        "formidable", "fantastique", "impeccable", "bravo", "félicitations",
        "ravi", "efficace", "rapide", "au top",
    ),
}

# ── Problem complexity ───────────────────────────────────────────────────
COMPLEXITY_LEXICONS = {
    "simple": (
        "simple", "facile", "basique", "élémentaire", "direct",
        "réinitialiser", "redémarrer", "relancer", "activer", "désactiver",
        "mot de passe", "identifiant", "compte", "accès", "connexion",
    ),
    "moderate": (
        "configuration", "paramétrage", "mise à jour", "installation",
        "migration", "synchronisation", "sauvegarde", "restauration",
        "récupération", "performance", "optimisation", "ralentissement",
        "lenteur",
    ),
    "complex": (
        "complexe", "difficile", "critique", "urgent", "grave", "sérieux",
        "corruption", "perte de données", "crash", "plantage", "écran bleu",
        "sécurité", "virus", "malware", "ransomware", "phishing", "réseau",
        "connectivité", "infrastructure", "serveur", "base de données",
    ),
}

# ── Neutral filler for synthetic sentences ───────────────────────────────
FILLER_WORDS = (
    "je", "vous", "il", "elle", "nous", "ils", "le", "la", "les", "un", "une",
    "des", "ce", "cette", "ces", "mon", "ma", "mes", "votre", "vos", "son",
    "sa", "ses", "notre", "nos", "leur", "leurs", "avec", "pour", "par", "en",
    "dans", "sur", "sous", "avant", "après", "pendant", "depuis", "vers",
    "chez", "entre", "et", "ou", "mais", "donc", "car", "aussi", "alors",
    "puis", "ici", "là",
)
