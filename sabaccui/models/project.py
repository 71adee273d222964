"""Project setup models"""

from dataclasses import dataclass
from typing import Dict, Optional, Any


@dataclass
class SetupAnswers:
    """Answers collected when setting up a project

    The Storyblok access token is only written into the project's ``.env``
    file and never persisted in the project configuration.
    """
    name: str
    space: Optional[str] = None
    domain: Optional[str] = None
    storyblok_token: Optional[str] = None

    def to_config(self) -> Dict[str, Any]:
        """Fields persisted in the project configuration"""
        data: Dict[str, Any] = {'name': self.name}
        if self.space:
            data['space'] = self.space
        if self.domain:
            data['domain'] = self.domain
        return data
