"""Fixed demonstration dataset shown while sample mode is on."""

from __future__ import annotations

from dataclasses import dataclass

from .agent_types import AgentResult, DelegationRecord, DelegationStats, TaskItem


@dataclass(frozen=True, slots=True)
class SampleDataset:
    result: AgentResult
    history: tuple[DelegationRecord, ...]


def build_sample_dataset() -> SampleDataset:
    result = AgentResult(
        summary="Processed 2 task emails, notified 3 teammates via Slack",
        stats=DelegationStats(tasks_processed=2, teammates_notified=3),
        items=(
            TaskItem(
                title="Prepare Q2 Financial Report",
                description="Compile and finalize the Q2 report using the latest numbers from the finance team.",
                priority="urgent",
                assignee="John Smith",
                slack_status="sent",
                email_subject="URGENT: Q2 Financial Report for Team",
                email_from="cfo@example.com",
                timestamp="2024-06-09T14:55:17Z",
            ),
            TaskItem(
                title="Update Marketing Materials",
                description="Revise marketing brochures to include the new product images.",
                priority="high",
                assignee="Emily Zhang",
                slack_status="sent",
                email_subject="Team: Marketing Material Update Needed",
                email_from="marketinglead@example.com",
                timestamp="2024-06-09T13:32:11Z",
            ),
            TaskItem(
                title="Schedule Sprint Planning",
                description="Organize the next sprint planning meeting and invite all stakeholders.",
                priority="medium",
                assignee="Alex Patel",
                slack_status="sent",
                email_subject="Action: Sprint Planning Setup",
                email_from="pm@example.com",
                timestamp="2024-06-09T12:10:05Z",
            ),
        ),
    )
    history = (
        DelegationRecord(
            record_id="sample-1",
            tasks=result.items,
            summary=result.summary,
            tasks_processed=result.stats.tasks_processed,
            teammates_notified=result.stats.teammates_notified,
            timestamp="2024-06-09T15:20:59Z",
        ),
        DelegationRecord(
            record_id="sample-2",
            tasks=(
                TaskItem(
                    title="Review Contract Draft",
                    description="Review the contract draft from legal team before Friday.",
                    priority="high",
                    assignee="Sarah Chen",
                    slack_status="sent",
                    email_subject="Contract Review Needed",
                    email_from="legal@example.com",
                    timestamp="2024-06-08T10:15:30Z",
                ),
            ),
            summary="Processed 1 task email, notified 1 teammate via Slack",
            tasks_processed=1,
            teammates_notified=1,
            timestamp="2024-06-08T10:30:00Z",
        ),
    )
    return SampleDataset(result=result, history=history)


SAMPLE_DATASET = build_sample_dataset()
