"""French lexicon for rule-based feedback scoring.

Four fixed vocabularies, all lowercase and accent-preserving. Tokens are
matched verbatim after lowercasing, so inflected forms are listed explicitly.
"""

POSITIVE_WORDS: frozenset[str] = frozenset(
    {
        "bon", "bonne", "bons", "bonnes", "bien", "mieux", "meilleur", "meilleure",
        "excellent", "excellente", "excellents", "excellentes",
        "super", "génial", "géniale", "geniale", "genial",
        "parfait", "parfaite", "parfaits", "parfaites", "impeccable",
        "satisfait", "satisfaite", "satisfaits", "content", "contente", "contents",
        "heureux", "heureuse", "ravi", "ravie", "ravis",
        "rapide", "rapides", "efficace", "efficaces", "fiable", "fiables",
        "agréable", "agreable", "sympa", "aimable", "chaleureux", "chaleureuse",
        "utile", "utiles", "pratique", "simple", "facile", "clair", "claire",
        "formidable", "magnifique", "merveilleux", "fantastique", "top", "bravo",
        "merci", "adore", "aime", "recommande", "professionnel", "professionnelle",
        "réactif", "réactive", "qualité",
    }
)

NEGATIVE_WORDS: frozenset[str] = frozenset(
    {
        "mauvais", "mauvaise", "mauvaises", "nul", "nulle", "nuls", "nulles",
        "horrible", "horribles", "terrible", "affreux", "affreuse",
        "lent", "lente", "lents", "lentes", "cher", "chère", "chers",
        "déçu", "déçue", "déçus", "decu", "decue", "décevant", "décevante", "decevant",
        "problème", "problèmes", "probleme", "problemes", "bug", "bugs",
        "panne", "erreur", "erreurs", "médiocre", "mediocre", "inutile", "inutiles",
        "difficile", "compliqué", "compliquée", "complique", "désagréable", "desagreable",
        "insatisfait", "insatisfaite", "pire", "catastrophe", "catastrophique",
        "arnaque", "retard", "retards", "cassé", "cassée", "casse", "défectueux",
        "incompétent", "incompétente", "impoli", "impolie", "sale", "honteux",
        "inadmissible", "inacceptable", "lamentable", "déteste", "deteste",
        "énervé", "fâché", "triste", "plainte", "attente",
    }
)

NEGATION_WORDS: frozenset[str] = frozenset(
    {
        "ne", "n", "pas", "jamais", "rien", "aucun", "aucune",
        "personne", "ni", "sans", "guère",
    }
)

INTENSIFIER_WORDS: frozenset[str] = frozenset(
    {
        "très", "tres", "trop", "vraiment", "tellement", "extrêmement", "extremement",
        "hyper", "ultra", "absolument", "totalement", "complètement", "completement",
        "particulièrement", "vachement", "si", "fort",
    }
)

# Lexicon weights
POSITIVE_WEIGHT = 0.5
NEGATED_POSITIVE_WEIGHT = -0.5
NEGATIVE_WEIGHT = -0.5
# A negated negative reads as mildly positive ("pas mal"), not a full reversal
NEGATED_NEGATIVE_WEIGHT = 0.3
INTENSIFIER_BOOST = 0.3

# Negation lapses on loop indices divisible by this
NEGATION_RESET_PERIOD = 3

# Blend
BASELINE_WEIGHT = 0.3
LEXICON_WEIGHT = 0.7
