from app.models.models import Education, NO_MATCH
from app.services.extractors import estimate_experience, detect_education, locate_snippet


class TestExperienceEstimator:
    """Test cases for the years-of-experience pattern"""

    def test_plus_years(self):
        assert estimate_experience("5+ years of experience") == "5+ years"

    def test_abbreviation_and_case(self):
        assert estimate_experience("Over 7 YRS in operations") == "7 YRS"

    def test_first_match_wins(self):
        assert estimate_experience("3 years at Acme, then 10 years at Globex") == "3 years"

    def test_no_duration(self):
        assert estimate_experience("Recent graduate, eager to learn") == NO_MATCH
        assert estimate_experience(None) == NO_MATCH


class TestEducationClassifier:
    """Test cases for the education tier heuristic"""

    def test_phd_outranks_bachelor(self):
        text = "PhD in Physics. Bachelor of Science in Mathematics."
        assert detect_education(text) == Education.PHD

    def test_doctor_of_philosophy(self):
        assert detect_education("Doctor of Philosophy, 2019") == Education.PHD

    def test_masters_variants(self):
        assert detect_education("M.Tech from IIT Delhi") == Education.MASTERS
        assert detect_education("Master of Business Administration") == Education.MASTERS
        assert detect_education("MSc Data Science") == Education.MASTERS

    def test_bachelors_variants(self):
        assert detect_education("BSc Computer Science") == Education.BACHELORS
        assert detect_education("B.E. Mechanical") == Education.BACHELORS

    def test_no_education(self):
        assert detect_education("Self-taught developer") == Education.UNKNOWN
        assert detect_education("") == Education.UNKNOWN


class TestSnippetLocator:
    """Test cases for the evidence snippet window"""

    def test_centered_on_first_jd_keyword(self):
        """The snippet anchors on React, the first JD keyword present, not Docker"""
        text = "Summary. " + "x" * 100 + " skilled in React and Docker, shipped " + "y" * 200
        pos = text.lower().find("react")
        snippet = locate_snippet(text, ["react", "kubernetes"])
        assert snippet == text[pos - 80:pos + 120] + "..."
        assert "React" in snippet

    def test_jd_order_beats_resume_order(self):
        text = "React " + "a" * 300 + " Docker " + "b" * 300
        snippet = locate_snippet(text, ["docker", "react"])
        assert "Docker" in snippet
        assert "React" not in snippet

    def test_window_clamped_to_text_bounds(self):
        text = "a" * 10 + "python rocks"
        assert locate_snippet(text, ["python"]) == text

    def test_fallback_to_opening_characters(self):
        text = "z" * 250
        assert locate_snippet(text, ["python"]) == "z" * 200 + "..."
        assert locate_snippet("hello", ["python"]) == "hello"

    def test_empty_text(self):
        assert locate_snippet("", ["python"]) == ""
        assert locate_snippet(None, []) == ""

    def test_offsets_survive_length_changing_lowercase(self):
        # "İ".lower() is two characters long
        text = "İ" * 5 + " python"
        assert locate_snippet(text, ["python"], before=0, after=6) == "python"
