"""surveyreport — schema-driven resolution engine for survey report dashboards."""

__version__ = "0.3.0"
