# bengal_portal/models/chat.py

from dataclasses import dataclass

USER = 'user'
ASSISTANT = 'assistant'


@dataclass(frozen=True)
class ChatTurn:
    role: str
    content: str

    def to_dict(self):
        return {'role': self.role, 'content': self.content}

    @classmethod
    def from_dict(cls, data):
        role = data['role']
        # Histories written by the browser client label assistant turns 'ai'.
        if role == 'ai':
            role = ASSISTANT
        if role not in (USER, ASSISTANT):
            raise ValueError(f"Unknown chat role: {role}")
        return cls(role=role, content=data['content'])
