"""
Kafka Topic Broker

An Open Service Broker style provisioner that maps service instance lifecycle
requests onto Kafka topic administration and hands out topic credentials on bind.
"""

__version__ = "0.1.0"
