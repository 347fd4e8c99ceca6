# Analysis stages module
from .element_model import ElementModel, create_default_element_model
from .stage1_parser import CandidateParser
from .stage2_scoring import WeightedScoringStage
from .stage3_filters import FilterStage
