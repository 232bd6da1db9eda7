import pika
import logging
import threading

rabbit_logger = logging.getLogger("RabbitMQ")

logging.getLogger("pika").setLevel(logging.ERROR)

PERSISTENT_DELIVERY = 2


class RabbitMQ:
    def __init__(self, exchange, q_name, key, exc_type, host="rabbitmq", auto_ack=False, prefetch_count=None, requeue_on_error=False):
        self.exchange = exchange
        self.q_name = q_name
        self.key = key
        self.exc_type = exc_type
        self.host = host
        self.auto_ack = auto_ack
        self.prefetch_count = prefetch_count
        self.requeue_on_error = requeue_on_error
        self.connection = pika.BlockingConnection(pika.ConnectionParameters(host=host, heartbeat=500))
        self.channel = self.create_channel()
        self.callback_func = None

    def create_channel(self):
        """Used to create a channel for the exchange."""

        channel = self.connection.channel()
        try:
            channel.basic_qos(prefetch_count=1)
            channel.exchange_declare(exchange=self.exchange, exchange_type=self.exc_type, durable=True)
        except Exception as e:
            rabbit_logger.error(f"Failed to create channel: {e}")
            if channel.is_open:
                channel.close()
            if self.connection.is_open:
                self.connection.close()
                rabbit_logger.info("Connection closed")
            raise

        rabbit_logger.debug(f"Channel created with exchange {self.exchange} of type {self.exc_type}")
        return channel

    def publish(self, message, routing_key=None):
        """Used to publish messages to the exchange.
        Allows overriding the default routing key.
        """
        key_to_use = routing_key if routing_key is not None else self.key

        try:
            self.channel.basic_publish(exchange=self.exchange,
                                routing_key=key_to_use,
                                body=message,
                                properties=pika.BasicProperties(
                                    delivery_mode=PERSISTENT_DELIVERY,
                                ))

            rabbit_logger.debug(f"Sent message to exchange {self.exchange} with routing key: {key_to_use}")
        except Exception as e:
            rabbit_logger.error(f"Failed to send message: {e}")
            raise

    def consume(self, callback_func, routing_key=None, stop_event=None):
        """The callback function is defined by the different nodes."""

        try:
            key_to_use = routing_key if routing_key is not None else self.key

            self.channel.queue_declare(queue=self.q_name, durable=True)
            if self.prefetch_count is not None:
                self.channel.basic_qos(prefetch_count=self.prefetch_count)
            self.channel.queue_bind(exchange=self.exchange, queue=self.q_name, routing_key=key_to_use)

            self.callback_func = callback_func
            self.channel.basic_consume(queue=self.q_name, on_message_callback=self.callback, auto_ack=self.auto_ack)

            if stop_event is not None:
                def check_stop():
                    stop_event.wait()
                    try:
                        self.connection.add_callback_threadsafe(
                            lambda: self.channel.stop_consuming()
                        )
                        rabbit_logger.debug(f"Scheduled stop consuming in {self.q_name}, with routing_key {key_to_use}")
                    except Exception as e:
                        rabbit_logger.error(f"Error scheduling stop for {self.q_name}, with routing_key {key_to_use}: {e}")

                t = threading.Thread(target=check_stop, daemon=True)
                t.start()

            rabbit_logger.info(f"Waiting for messages in {self.q_name}, with routing_key {key_to_use}. To exit press CTRL+C")
            self.channel.start_consuming()

        except KeyboardInterrupt:
            rabbit_logger.info("Exiting...")

        except Exception as e:
            rabbit_logger.error(f"Failed to consume from {self.q_name}: {e}")
            raise

        finally:
            self.close()

    def callback(self, ch, method, properties, body):
        if self.auto_ack:
            self.callback_func(ch, method, properties, body)
            return

        try:
            self.callback_func(ch, method, properties, body)
        except Exception as e:
            rabbit_logger.error(f"Failed to process message: {e}", exc_info=True)
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=self.requeue_on_error)
            return
        ch.basic_ack(delivery_tag=method.delivery_tag)

    def close(self):
        """Closes the channel and the connection."""
        if self.channel.is_open:
            self.channel.close()
            rabbit_logger.info("Channel closed")
        if self.connection.is_open:
            self.connection.close()
            rabbit_logger.info("Connection closed")
