"""Wire-level helpers shared by every node: the RabbitMQ client wrapper and
the payload codec for price messages."""
