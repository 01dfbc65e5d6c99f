"""Prompt templates for the Gemini enrichment calls."""

import json
from typing import Any

from rd_prediction.domain.entities.prediction import PatientInfo, PredictionResult
from rd_prediction.domain.enums import ModelType

MODEL_CONTEXTS: dict[ModelType, dict[str, Any]] = {
    ModelType.PNEUMONIA: {
        "specialty": "pulmonology",
        "title": "CHEST X-RAY",
        "positive": {
            "meaning": "Signs of lung infection are present. Treatment is required.",
            "urgency": "Moderate urgency. See a doctor within 24 hours.",
            "recommendation": "Antibiotic treatment and rest may be needed.",
        },
        "negative": {
            "meaning": "The lungs appear normal. No sign of pneumonia.",
            "urgency": "Routine follow-up is sufficient.",
            "recommendation": "Maintain current health habits.",
        },
    },
    ModelType.BRAIN_TUMOR: {
        "specialty": "neurosurgery",
        "title": "BRAIN MRI/CT",
        "positive": {
            "meaning": "An abnormal structure was found in brain tissue. Detailed examination is required.",
            "urgency": "HIGH URGENCY. Immediate neurology or neurosurgery consultation.",
            "recommendation": "Advanced imaging and biopsy evaluation are required.",
        },
        "negative": {
            "meaning": "Brain imaging is normal. No sign of a tumor.",
            "urgency": "Routine follow-up is sufficient.",
            "recommendation": "Continue regular health check-ups.",
        },
    },
    ModelType.TUBERCULOSIS: {
        "specialty": "infectious diseases",
        "title": "TUBERCULOSIS SCREENING",
        "positive": {
            "meaning": "Signs of tuberculosis are present. Treatment should start immediately.",
            "urgency": "HIGH URGENCY. Contagious disease, isolation is required.",
            "recommendation": "Start anti-TB treatment and contact tracing.",
        },
        "negative": {
            "meaning": "No sign of tuberculosis. The lungs are healthy.",
            "urgency": "Routine follow-up is sufficient.",
            "recommendation": "Keep up preventive measures.",
        },
    },
}


def _patient_lines(patient_info: PatientInfo | None) -> str:
    if patient_info is None:
        return ""
    lines = []
    if patient_info.age is not None:
        lines.append(f"- Age: {patient_info.age}")
    if patient_info.gender:
        lines.append(f"- Gender: {patient_info.gender}")
    if patient_info.symptoms:
        lines.append(f"- Symptoms: {patient_info.symptoms}")
    if patient_info.medical_history:
        lines.append(f"- Medical history: {patient_info.medical_history}")
    return "\n".join(lines)


def interpretation_prompt(
    model_type: ModelType,
    result: PredictionResult,
    patient_info: PatientInfo | None,
) -> str:
    context = MODEL_CONTEXTS[model_type]
    outcome = context["positive" if result.is_positive else "negative"]
    confidence = f"{result.confidence * 100:.1f}"
    status = "POSITIVE (disease present)" if result.is_positive else "NEGATIVE (normal/healthy)"

    return f"""You are a specialist in {context['specialty']}. Write a short, focused medical assessment of at most 200 words.

Terminology:
- "notumor" means no tumor was found (normal)
- "Normal" means no disease (healthy)
- "Pneumonia" means a lung infection is present
- "Tuberculosis" means tuberculosis is present

{context['title']} ANALYSIS:
- Result: {result.predicted_class} ({confidence}% confidence)
- Status: {status}
{_patient_lines(patient_info)}

Cover, in order:
1. Finding: {result.predicted_class} ({confidence}% confidence).
2. Clinical meaning: {outcome['meaning']}
3. Urgency: {outcome['urgency']}
4. Recommendation: {outcome['recommendation']}
5. Warning: this is an AI analysis and must be confirmed by a {context['specialty']} specialist.

Answer in English, concisely, in at most 200 words."""


def disease_info_prompt(disease_name: str, patient_info: PatientInfo | None) -> str:
    patient = _patient_lines(patient_info)
    patient_block = f"\nPatient context:\n{patient}\n" if patient else ""
    return f"""You are a medical expert. Give patient-friendly information about "{disease_name}" in at most 500 words.
{patient_block}
Cover: what the disease is, common symptoms, causes and risk factors, diagnosis, treatment options, prevention, and when to seek urgent care.

Answer in English."""


def recommendations_prompt(patient_data: dict[str, Any]) -> str:
    return f"""You are a family physician's assistant. Prepare personalised health recommendations for this patient:

PATIENT DATA:
{json.dumps(patient_data, indent=2, default=str)}

Provide:
1. General health advice and preventive measures for this age and profile
2. A nutrition plan: foods to favour, foods to avoid, portion guidance
3. An exercise programme: suitable activities, duration and frequency, precautions
4. Lifestyle: sleep, stress management, harmful habits to avoid
5. A follow-up schedule: regular check-ups, recommended tests, age-appropriate vaccinations

Answer in English with practical, personalised recommendations."""


HEALTH_CHECK_PROMPT = "Hello, this is a connectivity test."
