# Import all models here to ensure they are registered with SQLModel.metadata
from app.models.survey import SurveyStation, Well

# Add any new models here
