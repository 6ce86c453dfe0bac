"""Brain-inspired analysis modules for Limbic.

This package organizes analysis functions using neuroscience-inspired naming:

## Module Structure

### amygdala/ - Emotional Processing
- Multi-factor mood scoring
- Message-level emotional trajectories
- Mood delta detection and classification

### hippocampus/ - Memory of Change
- Delta significance with temporal context
- Delta pattern detection
- Turning point detection

### neocortex/ - Pattern Recognition & Abstraction
- Emotional, communication, relationship and psychological features
- Weighted feature similarity
- Memory clustering

### temporal_lobe/ - Temporal Processing
- Time-of-day, weekday and seasonal context
- Temporal proximity between memories

## Design Philosophy

Every module here is pure and synchronous: same input, same output.
Storage lives in limbic.infra; orchestration in limbic.domain.services.
"""
