"""
ThreadSummaryBot - summarizes an artifact's comment thread.

Returns the decisions, action items and overall sentiment of the discussion
in a short paragraph. Contrast with AnalystBot, which answers questions about
the sales data itself.
"""

from .base import FlowError, LLMBaseAgent
from .schemas import SummarizeThreadInput, SummarizeThreadOutput


class ThreadSummaryBot(LLMBaseAgent):
    """
    Usage:
        bot = ThreadSummaryBot()
        out = bot.summarize(SummarizeThreadInput(thread=json.dumps(comments)))
        out.summary
    """

    def __init__(self, model=None, client=None):
        super().__init__(model=model, max_tokens=500, client=client)
        self.system_prompt = """You are an AI assistant expert at summarizing conversations.

Analyze the discussion thread and provide a concise summary.
Highlight any decisions made, action items assigned, and the overall sentiment of the conversation.

Rules:
- Answer in plain text only. No markdown, bullet lists or code blocks
- Be concise: 2-4 sentences
- Do NOT invent decisions or action items that are not in the thread"""

    def summarize(self, payload: SummarizeThreadInput) -> SummarizeThreadOutput:
        """
        Raises:
            FlowError: API failure or an empty answer
        """
        text = self.call_api(
            self.system_prompt,
            [{"role": "user", "content": f"Conversation Thread (JSON):\n{payload.thread}"}]
        )
        if not text.strip():
            raise FlowError("Empty summary from model")
        return SummarizeThreadOutput(summary=text.strip())
