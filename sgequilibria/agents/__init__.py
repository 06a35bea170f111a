from sgequilibria.agents.base import Agent
from sgequilibria.agents.equilibrium_agent import EquilibriumPlayingAgent
