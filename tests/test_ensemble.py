"""Ensemble resolver: selection policy, defaults and end-to-end scenarios."""

import pytest

from intake.config import CATEGORY_IDS, TYPE_IDS
from intake.engine import EngineInitializationError
from intake.preprocessing.entities import Entities
from intake.routing.ensemble import EnsembleResolver, category_name, missing_information
from intake.routing.results import CategoryResult, ComplexityResult, TypeResult
from intake.routing.rules import Prediction
from intake.tasks import TASK_DEFS

SCENARIO_PRINTER = "Mon imprimante ne fonctionne plus, c'est urgent, je ne peux plus travailler."
SCENARIO_ACCESS = "J'aimerais avoir accès au dossier partagé du service comptabilité."

TEXTS = [
    SCENARIO_PRINTER,
    SCENARIO_ACCESS,
    "Le wifi coupe sans arrêt depuis ce matin, c'est inadmissible !",
    "Pourriez-vous installer Excel sur mon nouveau portable ?",
    "J'ai reçu un mail suspect qui demande mon mot de passe",
    "Merci pour votre aide, tout fonctionne parfaitement",
    "banane",
    "",
    "!!!???",
]


# ── Stubs for the selection policy ───────────────────────────────────────

class _StubEngine:
    task_defs = TASK_DEFS

    def __init__(self, fail=False):
        self.fail = fail
        self.is_initialized = not fail

    def initialize(self):
        if self.fail:
            raise EngineInitializationError("no models")
        return self


class _Fixed:
    """Signal source returning a canned prediction (or raising)."""

    def __init__(self, prediction=None, error=None):
        self.prediction = prediction
        self.error = error

    def predict(self, text, candidates=None, default=None):
        if self.error:
            raise self.error
        return self.prediction


def _stubbed(task, learned, rule, engine=None):
    resolver = EnsembleResolver(engine or _StubEngine(), mode="rules")
    resolver.learned = {task: learned}
    resolver.rules = dict(resolver.rules, **{task: rule})
    return resolver


# ── Fallback law ─────────────────────────────────────────────────────────

def test_confident_model_wins():
    r = _stubbed("type", _Fixed(Prediction("request", 0.95)), _Fixed(Prediction("incident", 1.0)))
    result = r.classify_type("x")
    assert (result.type, result.type_id, result.source) == ("request", 2, "model")
    assert result.confidence == 0.95


def test_threshold_is_strict_for_model():
    # 0.7 does not *exceed* the type threshold → rules decide
    r = _stubbed("type", _Fixed(Prediction("request", 0.7)), _Fixed(Prediction("incident", 0.8)))
    result = r.classify_type("x")
    assert (result.type, result.source) == ("incident", "rules")


def test_rules_win_at_threshold():
    r = _stubbed("urgency", _Fixed(Prediction(5, 0.4)), _Fixed(Prediction(1, 0.7)))
    result = r.classify_urgency("x")
    assert (result.urgency, result.confidence, result.source) == (1, 0.7, "rules")


def test_both_weak_gives_task_default():
    r = _stubbed("urgency", _Fixed(Prediction(5, 0.4)), _Fixed(Prediction(1, 0.6)))
    result = r.classify_urgency("x")
    assert (result.urgency, result.confidence, result.source) == (3, 0.5, "default")


def test_abstaining_model_defers_to_rules():
    r = _stubbed("sentiment", _Fixed(None), _Fixed(Prediction("negative", 1.0, {"negative": 2})))
    result = r.classify_sentiment("x")
    assert (result.sentiment, result.source) == ("negative", "rules")
    assert result.scale == "très négatif"


def test_weak_category_defaults_to_other_of_type():
    r = _stubbed("category", _Fixed(Prediction("demande_logiciel", 0.3)), _Fixed(Prediction("demande_logiciel", 0.5)))
    result = r.classify_category("x", "request")
    assert result.category == "demande_autre"
    assert result.category_id == CATEGORY_IDS["demande_autre"]


def test_inference_error_returns_default():
    r = _stubbed("complexity", _Fixed(error=RuntimeError("nan")), _Fixed(Prediction("complex", 1.0)))
    result = r.classify_complexity("x")
    assert (result.complexity, result.confidence, result.source, result.score) == ("moderate", 0.5, "default", 2)


def test_initialisation_error_propagates():
    r = _stubbed("type", _Fixed(Prediction("request", 0.9)), _Fixed(Prediction("incident", 1.0)),
                 engine=_StubEngine(fail=True))
    with pytest.raises(EngineInitializationError):
        r.classify_type("x")


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        EnsembleResolver(mode="neural-only")


# ── Rules-only mode ──────────────────────────────────────────────────────

def test_rules_mode_needs_no_models():
    r = EnsembleResolver(mode="rules")
    assert r.engine is None
    assert r.classify_type(SCENARIO_PRINTER).type == "incident"
    assert r.classify_category(SCENARIO_PRINTER, "incident").category == "incident_materiel"
    assert r.classify_urgency(SCENARIO_PRINTER).urgency == 1
    assert r.classify_type(SCENARIO_ACCESS).type_id == 2


# ── Invariants on the trained engine ─────────────────────────────────────

@pytest.mark.parametrize("text", TEXTS)
def test_result_invariants(resolver, text):
    t = resolver.classify_type(text)
    assert t.type_id in {1, 2}
    assert 0.0 <= t.confidence <= 1.0

    prefix = "incident_" if t.type == "incident" else "demande_"
    c = resolver.classify_category(text, t.type)
    assert c.category.startswith(prefix)
    assert c.category_id == CATEGORY_IDS[c.category]

    assert resolver.classify_urgency(text).urgency in {1, 2, 3, 4, 5}
    assert resolver.classify_sentiment(text).sentiment in {"negative", "neutral", "positive"}
    assert resolver.classify_complexity(text).score in {1, 2, 3}


@pytest.mark.parametrize("text", TEXTS)
def test_deterministic(resolver, text):
    assert resolver.analyze(text) == resolver.analyze(text)


# ── Scenarios ────────────────────────────────────────────────────────────

def test_scenario_broken_printer(resolver):
    t = resolver.classify_type(SCENARIO_PRINTER)
    assert (t.type, t.type_id) == ("incident", TYPE_IDS["incident"])
    assert resolver.classify_category(SCENARIO_PRINTER, t.type).category == "incident_materiel"
    assert resolver.classify_urgency(SCENARIO_PRINTER).urgency == 1


def test_scenario_access_request(resolver):
    t = resolver.classify_type(SCENARIO_ACCESS)
    assert (t.type, t.type_id) == ("request", 2)
    assert resolver.classify_category(SCENARIO_ACCESS, t.type).category == "demande_acces"


@pytest.mark.parametrize("text", ["banane", ""])
def test_scenario_no_signal_defaults(resolver, text):
    t = resolver.classify_type(text)
    assert (t.type, t.type_id, t.confidence, t.source) == ("incident", 1, 0.5, "default")
    assert resolver.classify_urgency(text).urgency == 3
    assert resolver.classify_complexity(text).complexity == "moderate"
    s = resolver.classify_sentiment(text)
    assert (s.sentiment, s.scale) == ("neutral", "neutre")
    assert resolver.classify_category(text, "incident").category == "incident_autre"


# ── Full analysis ────────────────────────────────────────────────────────

def test_analyze_expands_and_titles(resolver):
    analysis = resolver.analyze("pb avec mon ordi. Il ne démarre plus depuis ce matin")
    assert analysis.improved_text.startswith("problème avec mon ordinateur.")
    assert analysis.title == "problème avec mon ordinateur"
    assert analysis.type.type == "incident"
    assert analysis.category.category.startswith("incident_")


def test_analyze_escalates_emphatic_messages(resolver):
    calm = "Le wifi est lent cette semaine"
    loud = "Le wifi est lent cette semaine !!!"
    base = resolver.classify_urgency(calm).urgency
    escalated = resolver.analyze(loud).urgency.urgency
    assert escalated == max(1, base - 1)
    # classify_urgency itself is not affected by emphasis
    assert resolver.classify_urgency(loud).urgency == base


def test_analyze_to_dict(resolver):
    data = resolver.analyze(SCENARIO_ACCESS).to_dict()
    assert data["type"]["type_id"] == 2
    assert set(data) >= {"title", "improved_text", "category", "urgency", "sentiment", "complexity"}


def test_analyze_attaches_ticket_details(resolver):
    analysis = resolver.analyze(
        "Suite au ticket n°4521, mon imprimante du bureau 204 est encore en panne. "
        "Contact : jean.dupont@acme.fr"
    )
    assert analysis.follow_up.is_follow_up
    assert analysis.follow_up.ticket_number == "4521"
    assert analysis.entities.emails == ("jean.dupont@acme.fr",)
    assert analysis.entities.locations == ("bureau 204",)
    assert analysis.category_name == category_name(analysis.category.category)
    assert analysis.missing_info


def test_analyze_scenario_names_category(resolver):
    analysis = resolver.analyze(SCENARIO_ACCESS)
    assert analysis.category_name == "Demande d'accès"
    assert not analysis.follow_up.is_follow_up


def test_category_names():
    assert category_name("incident_materiel") == "Incident matériel"
    assert category_name("demande_autre") == "Autre demande"
    assert category_name("inconnue") == "Catégorie inconnue"


# ── Missing information ──────────────────────────────────────────────────

def _details(type_conf, cat_conf, category="incident_materiel", complexity="moderate", entities=None):
    return missing_information(
        TypeResult("incident", 1, type_conf, "model"),
        CategoryResult(category, CATEGORY_IDS[category], cat_conf, "model"),
        ComplexityResult(complexity, 0.9, "model", 2),
        entities or Entities(),
    )


def test_missing_info_on_weak_type_and_category():
    missing = _details(0.5, 0.69)
    assert missing[:2] == (
        "Préciser s'il s'agit d'un incident ou d'une demande",
        "Plus de détails sur la catégorie du problème",
    )


def test_missing_info_asks_for_dates_and_people():
    missing = _details(0.9, 0.9)
    assert missing == (
        "Préciser si une date est importante pour cette demande",
        "Préciser les personnes concernées par cette demande",
    )


def test_missing_info_category_detail_for_simple_incidents():
    missing = _details(0.9, 0.9, category="incident_reseau", complexity="simple")
    assert missing[-1] == "Préciser si d'autres utilisateurs sont affectés"


def test_missing_info_falls_back_to_screenshots():
    complete = Entities(dates=("lundi",), people=("madame Martin",))
    assert _details(0.7, 0.7, entities=complete) == (
        "Des captures d'écran ou photos pourraient être utiles",
    )
