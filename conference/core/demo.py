"""
Sample abstracts and registrations for trying the dashboard without a backend.
"""

from datetime import datetime, timedelta
from typing import Dict, List

from .schema import (
    STATUS_ACCEPTED,
    STATUS_PENDING,
    AbstractSubmission,
    Registration,
    iso_timestamp,
    utc_now,
)

DEMO_ABSTRACTS = (
    {
        "full_name": "Dr. Sarah Johnson",
        "job_title": "AI Research Scientist",
        "email": "sarah.johnson@university.edu",
        "phone": "+1-555-0101",
        "institution": "MIT AI Lab",
        "country": "United States",
        "title": "Deep Learning Applications in Healthcare Diagnostics",
        "abstract": "This research explores the application of deep learning models in medical image "
                    "analysis, focusing on early detection of diseases through automated diagnostic systems.",
        "co_authors": ["Dr. Michael Chen", "Prof. Emily Rodriguez"],
        "file_name": "healthcare-ai-research.docx",
        "status": STATUS_PENDING,
        "days_ago": 2,
    },
    {
        "full_name": "Prof. Ahmed Al-Mansouri",
        "job_title": "Professor of Computer Science",
        "email": "ahmed.almansouri@uae.ac.ae",
        "phone": "+971-50-1234567",
        "institution": "UAE University",
        "country": "United Arab Emirates",
        "title": "Natural Language Processing for Arabic Text Analysis",
        "abstract": "A transformer-based approach to Arabic NLP that addresses morphological complexity "
                    "and dialectal variation in sentiment analysis and named entity recognition.",
        "co_authors": ["Dr. Fatima Hassan", "Dr. Omar Khalid"],
        "file_name": "arabic-nlp-research.docx",
        "status": STATUS_ACCEPTED,
        "days_ago": 5,
    },
    {
        "full_name": "Dr. Maria Garcia",
        "job_title": "Senior Data Scientist",
        "email": "maria.garcia@techcorp.com",
        "phone": "+34-600-123456",
        "institution": "Barcelona Tech Institute",
        "country": "Spain",
        "title": "Reinforcement Learning for Autonomous Vehicle Navigation",
        "abstract": "A reinforcement learning framework for autonomous navigation in complex urban "
                    "environments with dynamic obstacles and unpredictable traffic.",
        "co_authors": ["Dr. Carlos Martinez"],
        "file_name": "autonomous-vehicles-rl.docx",
        "status": STATUS_PENDING,
        "days_ago": 1,
    },
    {
        "full_name": "Dr. Raj Kumar",
        "job_title": "AI Ethics Researcher",
        "email": "raj.kumar@iisc.in",
        "phone": "+91-98765-43210",
        "institution": "Indian Institute of Science",
        "country": "India",
        "title": "Ethical Considerations in AI-Powered Decision Making Systems",
        "abstract": "Guidelines for fairness and accountability when AI systems drive decisions in "
                    "healthcare, criminal justice and financial services.",
        "co_authors": ["Prof. Priya Sharma", "Dr. Anil Verma"],
        "file_name": "ai-ethics-framework.docx",
        "status": STATUS_ACCEPTED,
        "days_ago": 7,
    },
    {
        "full_name": "Dr. Lisa Chen",
        "job_title": "Machine Learning Engineer",
        "email": "lisa.chen@ailab.sg",
        "phone": "+65-9123-4567",
        "institution": "Singapore AI Research Lab",
        "country": "Singapore",
        "title": "Federated Learning for Privacy-Preserving AI Models",
        "abstract": "An improved federated learning approach that trains across distributed datasets "
                    "while preserving privacy and reducing communication overhead.",
        "co_authors": ["Dr. Wei Zhang", "Prof. John Tan"],
        "file_name": "federated-learning-privacy.docx",
        "status": STATUS_PENDING,
        "days_ago": 3,
    },
)

DEMO_REGISTRATIONS = (
    {
        "full_name": "John Smith",
        "email": "john.smith@email.com",
        "phone": "+1-555-0201",
        "country": "United States",
        "organization": "Tech Innovations Inc",
        "registration_type": "Speaker",
        "days_ago": 4,
    },
    {
        "full_name": "Aisha Mohammed",
        "email": "aisha.mohammed@email.ae",
        "phone": "+971-50-9876543",
        "country": "United Arab Emirates",
        "organization": "Dubai AI Center",
        "registration_type": "Attendee",
        "days_ago": 6,
    },
    {
        "full_name": "Emma Wilson",
        "email": "emma.wilson@university.edu",
        "phone": "+44-7700-123456",
        "country": "United Kingdom",
        "organization": "Oxford University",
        "registration_type": "Student",
        "days_ago": 2,
    },
)


def demo_abstracts(now: datetime = None) -> List[Dict]:
    """Stored-form sample abstracts, timestamps relative to `now`."""
    now = now or utc_now()
    millis = int(now.timestamp() * 1000)
    records = []
    for n, sample in enumerate(DEMO_ABSTRACTS, start=1):
        fields = {k: v for k, v in sample.items() if k != "days_ago"}
        records.append(AbstractSubmission(
            id=f"ABS-{millis}-{n}",
            submitted_at=iso_timestamp(now - timedelta(days=sample["days_ago"])),
            **fields,
        ).to_dict())
    return records


def demo_registrations(now: datetime = None) -> List[Dict]:
    now = now or utc_now()
    millis = int(now.timestamp() * 1000)
    records = []
    for n, sample in enumerate(DEMO_REGISTRATIONS, start=1):
        fields = {k: v for k, v in sample.items() if k != "days_ago"}
        records.append(Registration(
            id=f"REG-{millis}-{n}",
            registered_at=iso_timestamp(now - timedelta(days=sample["days_ago"])),
            **fields,
        ).to_dict())
    return records
